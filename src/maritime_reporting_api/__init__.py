# src/maritime_reporting_api/__init__.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
"""Maritime report lifecycle and workflow service."""
