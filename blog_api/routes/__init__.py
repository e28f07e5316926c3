# Routes package init
"""
Blog API — API Routes Package
===============================

Route Inventory:
    - blogs.py:    GET|POST /blogs, GET|PUT|PATCH|DELETE /blogs/{id}
    - storage.py:  GET /storage/{path}     (public storage files)
    - health.py:   GET /health             (service health check)

Routes handle HTTP concerns only and delegate to the services layer.
"""
