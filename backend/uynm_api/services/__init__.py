# Services package init
"""
UYNM Backend — Services Layer
===============================

What:  Business rules between the routers (HTTP) and the external
       collaborators (store, identity provider, mail relay).
How:   Resource services are stateless singletons that receive the
       request-scoped AsyncSession (or the identity provider) per call and
       raise exceptions from uynm_api.exceptions. Routers shape the envelope.

Service Inventory:
    - contact_service:      contact messages (create, list, status)
    - member_service:       membership profiles (register, list + stats, read)
    - newsletter_service:   subscriptions (subscribe/reactivate, unsubscribe, list)
    - event_service:        events and event registrations
    - auth_service:         pass-through to the identity provider
    - identity:             IdentityProvider contract + Supabase Auth client
    - mail_transport:       MailTransport contract + SMTP relay
    - notification_service: best-effort admin notification emails
"""
