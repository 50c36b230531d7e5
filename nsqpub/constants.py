'''Constants for the NSQ publish protocol'''

# NSQ Magic
MAGIC_V2 = b'  V2'

# The newline character
NL = b'\n'

# Response
FRAME_TYPE_RESPONSE = 0
FRAME_TYPE_ERROR = 1

# Bytes of a frame's length taken up by the frame type
FRAME_TYPE_SIZE = 4

# Command names
PUB = b'PUB'
MPUB = b'MPUB'

# Where nsqd listens for TCP clients
DEFAULT_PORT = 4150

# The default receive timeout on the socket, 0.5s
SOCKET_TIMEOUT_S = 0
SOCKET_TIMEOUT_US = 500000

# The most bytes asked of a single recv, whatever length nsqd advertises
RECV_CHUNK_SIZE = 65536
