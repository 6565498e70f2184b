# Routes package init
"""
UYNM Backend — API Routes Package
===================================

What:  HTTP route handlers for the website's forms and the admin dashboard.
How:   Each module owns one resource and an APIRouter with its /api prefix.

Route Inventory:
    - health.py:      GET  /                        (service banner)
                      GET  /api/health              (liveness)
    - auth.py:        POST /api/auth/register | login | logout | reset-password
    - contact.py:     POST /api/contact             GET /api/contact (admin)
                      PATCH /api/contact/{id}/status (admin)
    - members.py:     POST /api/members/register    GET /api/members[/{id}] (admin)
    - newsletter.py:  POST /api/newsletter/subscribe
                      DELETE /api/newsletter/unsubscribe
                      GET /api/newsletter/subscribers (admin)
    - events.py:      GET /api/events[/{id}]        POST /api/events/{id}/register
                      POST/PUT/DELETE /api/events[/{id}] (admin)

Routes stay thin: validate (request models), call a service, schedule the
notification as a background task, shape the envelope.
"""
