"""Print a bearer token for the given email.

Usage:
    python create_token.py reader@example.com [lifetime_seconds]
"""
import sys

from bookstore_api.app.core.security import create_access_token

if len(sys.argv) < 2:
    sys.exit(__doc__)
lifetime = int(sys.argv[2]) if len(sys.argv) > 2 else None
print(create_access_token({"email": sys.argv[1]}, expires_delta=lifetime))
