DOCS_PREFIX = "/api/v1"
DOCS_TAG = "Documentation"

DOCS_ROUTES = {
    # viewer
    "index": "/docs",
    "section": "/docs/{slug}",
    "page": "/docs/{slug}/{page_id}",
    # admin
    "admin_index": "/admin/documentation",
    "create_section": "/admin/documentation/sections",
    "reorder_sections": "/admin/documentation/sections/reorder",
    "update_section": "/admin/documentation/sections/{section_id}",
    "delete_section": "/admin/documentation/sections/{section_id}",
    "create_page": "/admin/documentation/pages",
    "reorder_pages": "/admin/documentation/pages/reorder",
    "update_page": "/admin/documentation/pages/{page_id}",
    "delete_page": "/admin/documentation/pages/{page_id}",
}
