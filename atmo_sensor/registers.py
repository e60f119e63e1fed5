"""BME280 register map.

Addresses are taken from the Bosch BME280 datasheet (section 5.3, memory
map). Multi-byte calibration words are stored LSB first.
"""

# I2C device addresses (SDO pin high / low)
ADDRESS_DEFAULT = 0x77
ADDRESS_ALTERNATIVE = 0x76

# Identification and reset
CHIP_ID_REG = 0xD0
RST_REG = 0xE0

CHIP_ID_BME280 = 0x60
SOFT_RESET = 0xB6

# Temperature calibration (LSB register of each 16-bit word)
DIG_T1_REG = 0x88
DIG_T2_REG = 0x8A
DIG_T3_REG = 0x8C

# Pressure calibration (LSB register of each 16-bit word)
DIG_P1_REG = 0x8E
DIG_P2_REG = 0x90
DIG_P3_REG = 0x92
DIG_P4_REG = 0x94
DIG_P5_REG = 0x96
DIG_P6_REG = 0x98
DIG_P7_REG = 0x9A
DIG_P8_REG = 0x9C
DIG_P9_REG = 0x9E

# Humidity calibration
DIG_H1_REG = 0xA1
DIG_H2_REG = 0xE1
DIG_H3_REG = 0xE3
DIG_H4_MSB_REG = 0xE4
DIG_H4_H5_SHARED_REG = 0xE5  # H4 bits 3:0 in the low nibble, H5 bits 3:0 in the high nibble
DIG_H5_MSB_REG = 0xE6
DIG_H6_REG = 0xE7

# Control and status
CTRL_HUMIDITY_REG = 0xF2
STAT_REG = 0xF3
CTRL_MEAS_REG = 0xF4
CONFIG_REG = 0xF5

# Status bits
STATUS_MEASURING = 0x08
STATUS_IM_UPDATE = 0x01

# Raw data, read as bursts starting at the MSB register
PRESSURE_MSB_REG = 0xF7
TEMPERATURE_MSB_REG = 0xFA
HUMIDITY_MSB_REG = 0xFD
