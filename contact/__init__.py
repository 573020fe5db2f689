"""
Contact App

Handles the Zyph Technologies website contact form:
- Public submission endpoint with per-address rate limiting
- Storage of every valid submission
- Admin alert and submitter confirmation emails
- Token-protected statistics and listing for the admin dashboard
"""
