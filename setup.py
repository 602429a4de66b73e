#!/usr/bin/env python3

from setuptools import find_packages, setup


def get_version():
    with open("mqtt2influx/__init__.py", "r", encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"')
    raise RuntimeError("__version__ not found")


setup(
    name="mqtt2influx",
    version=get_version(),
    description="Forward smart meter, smart plug and zigbee sensor readings from MQTT to InfluxDB",
    license="MIT",
    packages=find_packages(include=["mqtt2influx", "mqtt2influx.*"]),
    python_requires=">=3.11",
    install_requires=[
        "paho-mqtt>=2.0",
        "httpx",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mqtt2influx=mqtt2influx.cli.main:main",
        ],
    },
)
