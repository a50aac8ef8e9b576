"""Infrastructure helpers shared by the batching core."""
