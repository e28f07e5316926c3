# Services package init
"""
Blog API — Services Layer
===========================

Service Inventory:
    - ImageService: base64 image decoding, storage, deletion and public URLs
    - BlogService:  Blog CRUD, coordinating records with their image files
"""
