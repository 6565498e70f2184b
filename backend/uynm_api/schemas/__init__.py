"""
UYNM Backend — Request/Response Schemas
=========================================

What:  Pydantic models defining the API contract with the static website.
How:   Request models (RequestModel subclasses) declare per-field validation
       rules from uynm_api.validation; response models wrap stored rows in the
       uniform `{"success", "message", "data"}` envelope.

Wire conventions:
    - Request bodies use camelCase keys (the website's form field names).
    - Stored records are returned with their column names (snake_case).
"""
