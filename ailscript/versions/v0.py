"""Function table of the unversioned (legacy) script format."""

from __future__ import annotations

from typing import Dict

from ..opcodes import OpSpec, build_function_table
from . import VersionHandler, register_handler

FUNCTION_SIGNATURES: Dict[int, str] = {
    0x00: "S", 0x01: "S", 0x02: "E", 0x03: "",
    0x04: "", 0x05: "", 0x06: "", 0x07: "",
    0x08: "EEEES", 0x09: "EEEES", 0x0A: "", 0x0B: "",
    0x0C: "E", 0x10: "E", 0x11: "", 0x12: "E",
    0x13: "", 0x14: "", 0x15: "E", 0x16: "EE",
    0x17: "E", 0x18: "E", 0x19: "EEE", 0x1A: "EEEEEEE",
    0x1B: "EEEEEEE", 0x1C: "EEEEEEEEEEE", 0x1D: "EEEEE", 0x1E: "EEE",
    0x1F: "EE", 0x20: "EEEE", 0x21: "EEEE", 0x22: "EEE",
    0x23: "EEEEE", 0x24: "EEEEE", 0x25: "EEEE", 0x26: "EEEE",
    0x27: "EEEEE", 0x28: "EE", 0x29: "EEEEEEEEEE", 0x2A: "EE",
    0x2B: "E", 0x2C: "E", 0x2D: "E", 0x2E: "E",
    0x2F: "", 0x30: "EE", 0x31: "EE", 0x32: "E",
    0x33: "E", 0x34: "E", 0x35: "E", 0x36: "E",
    0x37: "E", 0x38: "EE", 0x39: "EE", 0x3A: "EE",
    0x3B: "EE", 0x3C: "E", 0x3D: "E", 0x3E: "E",
    0x3F: "E", 0x40: "EE", 0x41: "E", 0x42: "",
    0x43: "", 0x44: "EE", 0x45: "E", 0x46: "EEE",
    0x47: "E", 0x48: "EE", 0x49: "EE", 0x4A: "",
    0x4B: "", 0x4C: "E", 0x4D: "E", 0x4E: "E",
    0x4F: "E", 0x50: "EE", 0x51: "EEEEEE", 0x52: "EEE",
    0x53: "EEE", 0x54: "", 0x55: "E", 0x56: "EE",
    0x57: "E", 0x58: "E", 0x59: "", 0x5A: "E",
    0x5B: "E", 0x5C: "", 0x5D: "E", 0x5E: "E",
    0x5F: "EE", 0x60: "EE", 0x61: "E", 0x62: "E",
    0x63: "EE", 0x64: "EE", 0x65: "EE", 0x66: "EE",
    0x67: "EEE", 0x68: "EEE", 0x69: "E", 0x6A: "E",
    0x6B: "EEEE", 0x6C: "EEEES", 0x6D: "EEEEEEEEEEE", 0x6E: "SE",
    0x6F: "EEEEE", 0x70: "E", 0x71: "E", 0x72: "E",
    0x73: "EE", 0x74: "EEEE", 0x75: "", 0x76: "",
    0x77: "E", 0x78: "E", 0x79: "E", 0x7A: "EE",
    0x7B: "", 0x7C: "", 0x7E: "EEEES", 0x7F: "E",
    0x80: "EE", 0x81: "EEEE", 0x82: "E", 0x83: "ES",
    0x84: "E", 0x85: "E", 0x86: "E", 0x87: "EEE",
    0x88: "EEE", 0x89: "EE", 0x8A: "S", 0x8B: "E",
    0x8C: "E", 0x8D: "E", 0x8E: "E", 0x8F: "EE",
    0x90: "EEEEE", 0x91: "EE", 0x92: "", 0x93: "",
    0x94: "ES", 0x95: "EE", 0x96: "E", 0x97: "EE",
    0x98: "EE", 0x99: "EEE", 0x9A: "E", 0x9B: "EEEE",
    0x9C: "EEEEE", 0x9D: "EEEES", 0x9E: "E", 0x9F: "EEE",
    0xA0: "EEEEES", 0xA1: "EE", 0xA2: "E", 0xA3: "",
    0xA4: "EEEEE", 0xA5: "EEEE", 0xA6: "", 0xA7: "",
    0xA8: "", 0xA9: "E", 0xAA: "EESEEEEEE", 0xAB: "",
    0xAC: "EEEE", 0xAD: "E", 0xAE: "EEEEE", 0xAF: "",
    0xB0: "E", 0xB1: "", 0xB2: "E", 0xB3: "",
    0xB4: "EEEEEEEEE", 0xB5: "EEEE", 0xB6: "", 0xB7: "EEEES",
    0xB8: "EEEES", 0xB9: "E", 0xBA: "", 0xBB: "E",
    0xBC: "E", 0xBD: "E", 0xBE: "E", 0xBF: "EEE",
    0xC0: "EEEE", 0xC1: "EEEE", 0xC2: "", 0xC3: "EE",
    0xC4: "EE", 0xC5: "EE", 0xC6: "EE", 0xC7: "EEEE",
    0xC8: "EE", 0xC9: "EESEEEEEE", 0xCA: "", 0xCB: "",
    0xCC: "", 0xCD: "", 0xCE: "EESEEEEEE", 0xCF: "",
    0xD0: "EE", 0xD1: "EEESEEEEEEEE", 0xD2: "E", 0xD3: "EESEEEEE",
    0xD4: "EE", 0xD5: "EE", 0xD6: "E", 0xD7: "S",
    0xD8: "", 0xD9: "", 0xDA: "", 0xDB: "",
    0xDC: "", 0xDD: "EEE", 0xDE: "EEEEE", 0xDF: "EEEEE",
    0xE0: "EEEEE", 0xE1: "E", 0xE2: "", 0xE3: "E",
    0xE4: "E", 0xE5: "EEEE", 0xE6: "", 0xE7: "EEEEE",
    0xE8: "EEEEE", 0xE9: "", 0xEA: "", 0xEB: "EE",
    0xEC: "SE", 0xED: "EEEEEE", 0xEE: "E", 0xEF: "EEESEEEEEE",
    0xF0: "E", 0xF1: "EEEEEEEEEE", 0xF2: "E", 0xF3: "E",
    0xF4: "EE", 0xF5: "EEE", 0xF6: "E", 0xF7: "E",
    0xF8: "E", 0xF9: "E", 0xFA: "E", 0xFB: "E",
    0xFC: "E",
}

FUNCTION_NAMES: Dict[int, str] = {
    0x00: "push_string",
    0x01: "push_string",
    0xB1: "setup_window",
}

FUNCTIONS: Dict[int, OpSpec] = build_function_table(FUNCTION_SIGNATURES, names=FUNCTION_NAMES)


class LegacyHandler(VersionHandler):
    name = "v0"

    def function_table(self) -> Dict[int, OpSpec]:
        return FUNCTIONS


register_handler(LegacyHandler)
HANDLER = LegacyHandler()
