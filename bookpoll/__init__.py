"""Book poll: collect book suggestions and rank them as a group."""
