"""
Shared constants for the KL130 local control tool.
"""

# UDP port the bulb listens on for local commands.
BULB_PORT = 9999

# Seed of the XOR autokey stream. Both directions restart from it on every message.
CIPHER_SEED = 171

# Seconds to wait for a reply datagram before giving up.
DEFAULT_TIMEOUT = 3

# Largest reply we read; get_sysinfo replies are well under 1 KiB.
RECV_BUFFER_SIZE = 4096

# Service envelopes used by the bulb's JSON protocol
LIGHTING_SERVICE = "smartlife.iot.smartbulb.lightingservice"
SYSTEM_SERVICE = "system"

# Property paths pushed to the host's state sink
LEVEL_PATH = "metrics:level"
COLOR_PATHS = (
	"metrics:color:r",
	"metrics:color:g",
	"metrics:color:b",
)
