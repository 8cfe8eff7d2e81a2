"""
Authentication module for the patient portal.

This module provides authentication and session functionality including:
- Registration, including upgrade of visitor placeholder accounts
- Login and logout with httpOnly session cookies
- Refresh-token renewal and bulk invalidation
- Password reset by emailed token
"""
