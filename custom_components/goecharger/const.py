"""Constants for the go-e Charger integration."""

DOMAIN = "goecharger"

# Config entry data keys (device settings)
CONF_ADDRESS = "address"
CONF_DRIVER = "driver"
CONF_SERIAL = "serial"

# Drivers map to the local HTTP API generation of the charger
DRIVER_V1 = "go-echarger"
DRIVER_V2 = "go-echarger-v2"
DRIVERS = (DRIVER_V1, DRIVER_V2)
DEFAULT_DRIVER = DRIVER_V1

# Options
OPTION_DEBUG_LOG = "debug_log"
OPTION_POLL_INTERVAL = "poll_interval"
DEBUG_LOG = False

# Timing, in seconds
POLL_INTERVAL = 5
MIN_POLL_INTERVAL = 2
MAX_POLL_INTERVAL = 300
WARMUP_DELAY = 5
CAPABILITY_SETTLE_DELAY = 2
VALUE_SETTLE_DELAY = 0.01
HTTP_TIMEOUT = 5

# Capability ids
CAP_MEASURE_POWER = "measure_power"
CAP_MEASURE_CURRENT = "measure_current"
CAP_MEASURE_VOLTAGE = "measure_voltage"
CAP_MEASURE_TEMPERATURE = "measure_temperature"
CAP_MEASURE_TEMPERATURE_PORT = "measure_temperature.charge_port"
CAP_METER_POWER = "meter_power"
CAP_CHARGING_ALLOWED = "onoff_charging_allowed"
CAP_CURRENT_LIMIT = "current_limit"
CAP_CURRENT_MAX = "current_max"
CAP_IS_CONNECTED = "is_connected"
CAP_ALARM_DEVICE = "alarm_device"
CAP_ENERGY_TOTAL = "energy_total"
CAP_STATUS = "status"
CAP_IS_CHARGING = "is_charging"

_COMMON_CAPABILITIES = (
    CAP_MEASURE_POWER,
    CAP_MEASURE_CURRENT,
    CAP_MEASURE_VOLTAGE,
    CAP_MEASURE_TEMPERATURE,
    CAP_METER_POWER,
    CAP_CHARGING_ALLOWED,
    CAP_CURRENT_LIMIT,
    CAP_CURRENT_MAX,
    CAP_IS_CONNECTED,
    CAP_ALARM_DEVICE,
    CAP_ENERGY_TOTAL,
    CAP_STATUS,
    CAP_IS_CHARGING,
)

# Capabilities each driver must expose. The v2 hardware reports a second
# temperature sensor at the charge port.
DRIVER_CAPABILITIES: dict[str, tuple[str, ...]] = {
    DRIVER_V1: _COMMON_CAPABILITIES,
    DRIVER_V2: _COMMON_CAPABILITIES[:4]
    + (CAP_MEASURE_TEMPERATURE_PORT,)
    + _COMMON_CAPABILITIES[4:],
}

# Platform owning the entity of each capability
CAPABILITY_PLATFORMS: dict[str, str] = {
    CAP_MEASURE_POWER: "sensor",
    CAP_MEASURE_CURRENT: "sensor",
    CAP_MEASURE_VOLTAGE: "sensor",
    CAP_MEASURE_TEMPERATURE: "sensor",
    CAP_MEASURE_TEMPERATURE_PORT: "sensor",
    CAP_METER_POWER: "sensor",
    CAP_CURRENT_MAX: "sensor",
    CAP_ENERGY_TOTAL: "sensor",
    CAP_STATUS: "sensor",
    CAP_IS_CONNECTED: "binary_sensor",
    CAP_ALARM_DEVICE: "binary_sensor",
    CAP_IS_CHARGING: "binary_sensor",
    CAP_CHARGING_ALLOWED: "switch",
    CAP_CURRENT_LIMIT: "number",
}

CAPABILITY_TITLES: dict[str, str] = {
    CAP_MEASURE_POWER: "Power",
    CAP_MEASURE_CURRENT: "Current",
    CAP_MEASURE_VOLTAGE: "Voltage",
    CAP_MEASURE_TEMPERATURE: "Temperature",
    CAP_MEASURE_TEMPERATURE_PORT: "Charge port temperature",
    CAP_METER_POWER: "Session energy",
    CAP_CHARGING_ALLOWED: "Charging allowed",
    CAP_CURRENT_LIMIT: "Current limit",
    CAP_CURRENT_MAX: "Maximum current",
    CAP_IS_CONNECTED: "Car connected",
    CAP_ALARM_DEVICE: "Alarm",
    CAP_ENERGY_TOTAL: "Total energy",
    CAP_STATUS: "Status",
    CAP_IS_CHARGING: "Charging",
}

# Static automation trigger registry
TRIGGER_SUFFIX = "_changed"
FLOW_TRIGGERS = (
    "onoff_charging_allowed_changed",
    "is_connected_changed",
    "alarm_device_changed",
    "is_charging_changed",
)
EVENT_TRIGGER = f"{DOMAIN}_trigger"

# Device command keys
COMMAND_CHARGING_ALLOWED = "alw"
COMMAND_CURRENT_LIMIT = "amp"

# Current limit bounds in amperes
CURRENT_LIMIT_MIN = 6
CURRENT_LIMIT_DEFAULT_MAX = 16

# Capability store persistence
CAPABILITY_STORE_VERSION = 1
CAPABILITY_STORE_KEY = "capabilities"
CAPABILITY_STORE_SAVE_DELAY = 10

# Zeroconf TXT record carrying the device type
DISCOVERY_DEVICETYPE = "devicetype"
