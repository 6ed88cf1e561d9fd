# Repository: https://gitlab.com/quantify-os/quantify-scheduler
# Licensed according to the LICENCE file on the main branch
"""Encoders translating pulses and control flow into APS2 instructions."""
