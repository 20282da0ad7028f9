"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Hash lengths
SHA256_HEX_LENGTH = 64

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 100
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_NAME_LENGTH = 100
MAX_PERMISSION_RESOURCE_LENGTH = 100
MAX_PERMISSION_ACTION_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 255

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt ignores everything past 72 bytes
DEFAULT_BCRYPT_ROUNDS = 10

# Token settings
DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24
ACCESS_TOKEN_JTI_LENGTH = 32
TOKEN_TYPE_ACCESS = "access"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32

# Messages shared by the authentication pipeline
MSG_AUTHENTICATION_REQUIRED = "Authentication required"
MSG_INVALID_TOKEN = "Invalid or expired token"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_INSUFFICIENT_PERMISSIONS = "Insufficient permissions"
