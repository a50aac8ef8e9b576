"""Unit tests for the exception hierarchy."""
from __future__ import annotations

import pytest

from each_batch.core.exceptions import EachBatchError, InvalidConfigurationError


@pytest.mark.unit
class TestEachBatchError:
    def test_message_without_details(self):
        error = EachBatchError("something broke")

        assert str(error) == "something broke"
        assert error.details == {}

    def test_message_with_details(self):
        error = EachBatchError("something broke", details={"page": 3})

        assert str(error) == "something broke (page=3)"


@pytest.mark.unit
class TestInvalidConfigurationError:
    def test_is_each_batch_error(self):
        assert issubclass(InvalidConfigurationError, EachBatchError)

    def test_option_and_value_recorded(self):
        error = InvalidConfigurationError("Batch size must be a positive integer", option="batch_size", value=0)

        assert error.option == "batch_size"
        assert error.value == 0
        assert error.message == "Batch size must be a positive integer"
        assert str(error) == "Batch size must be a positive integer (option='batch_size', value=0)"

    def test_without_option(self):
        error = InvalidConfigurationError("Composite primary keys are not supported")

        assert error.option is None
        assert str(error) == "Composite primary keys are not supported"

    def test_repr(self):
        error = InvalidConfigurationError("bad", option="order", value="up")

        assert repr(error) == "InvalidConfigurationError('bad', option='order')"
