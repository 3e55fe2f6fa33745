"""
Host Server Constants Module
Protocol constants for host server frames and the sign-on service.
"""

# Sign-on service descriptor
SIGNON_SERVICE_NAME = "as-signon"
SIGNON_SERVER_ID = 0xE009
SIGNON_DEFAULT_PORT = 8476
SIGNON_DEFAULT_TLS_PORT = 9476

# Frame header layout
HEADER_SIZE = 20  # LENGTH(4) + HEADER_ID(2) + SERVER_ID(2) + CS_INSTANCE(4) + CORRELATION(4) + TEMPLATE(2) + REQREP_ID(2)
OFFSET_LENGTH = 0
OFFSET_HEADER_ID = 4
OFFSET_SERVER_ID = 6
OFFSET_CS_INSTANCE = 8
OFFSET_CORRELATION_ID = 12
OFFSET_TEMPLATE_LENGTH = 16
OFFSET_REQREP_ID = 18

# LL/CP parameter prefix: LL(4) + CP(2)
PARAMETER_HEADER_SIZE = 6

# Replies shorter than this cannot hold a header and a return code
MIN_REPLY_SIZE = 24

# Frame limits
MAX_FRAME_SIZE = 1024 * 1024

# Request / reply identifiers
SEED_EXCHANGE_REQUEST_ID = 0x7003
SEED_EXCHANGE_REPLY_ID = 0xF003
SIGNON_INFO_REQUEST_ID = 0x7004
SIGNON_INFO_REPLY_ID = 0xF004

# Code points
CP_CLIENT_VERSION = 0x1101
CP_SERVER_VERSION = 0x1101
CP_CLIENT_LEVEL = 0x1102
CP_SERVER_LEVEL = 0x1102
CP_CLIENT_SEED = 0x1103
CP_SERVER_SEED = 0x1103
CP_USER_ID = 0x1104
CP_PASSWORD = 0x1105
CP_CURRENT_SIGNON_DATE = 0x1106
CP_LAST_SIGNON_DATE = 0x1107
CP_EXPIRATION_DATE = 0x1108
CP_CLIENT_CCSID = 0x1113
CP_SERVER_CCSID = 0x1114
CP_PASSWORD_LEVEL = 0x1119
CP_RETURN_ERROR_MESSAGES = 0x1128
CP_EXPIRATION_WARNING = 0x112C

# Client protocol values
CLIENT_VERSION = 0x00000001
CLIENT_DATASTREAM_LEVEL = 0x0002
CLIENT_CCSID = 1200
SEED_SIZE = 8

# Server level from which the host honours the return-error-messages parameter
RETURN_ERROR_MESSAGES_SERVER_LEVEL = 5

# EBCDIC code page for user ids and level 0/1 passwords
EBCDIC_CODEC = "cp037"
USER_ID_SIZE = 10

# Timeouts (in seconds)
DEFAULT_CONNECT_TIMEOUT = 30.0
DEFAULT_READ_TIMEOUT = None
DEFAULT_WRITE_TIMEOUT = None
