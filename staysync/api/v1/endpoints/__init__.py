"""v1 endpoint routers, one module per resource."""
