"""
  File with all constants in project
"""
import logging

# Topic conventions
TOPIC_SEPARATOR = "/"
TOPIC_WILDCARD_SUFFIX = "/#"
# Second topic level that Tasmota-style firmwares use for telemetry
SENSOR_MESSAGE_TYPE = "SENSOR"

# MQTT defaults
MQTT_DEFAULT_PORT = 1883
MQTT_DEFAULT_TLS_PORT = 8883
MQTT_KEEPALIVE = 60
MQTT_CLIENT_ID_PREFIX = "mqtt2influx"
MQTT_LOOP_TIMEOUT = 1.0

# InfluxDB defaults
INFLUXDB_WRITE_PATH = "api/v2/write"
INFLUXDB_PRECISION = "s"
INFLUXDB_TIMEOUT = 10.0

# Logging
ROOT_LOGGER_NAME = "mqtt2influx"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Below DEBUG; used for per-message noise (ignored topics, bad payloads)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")
