# Copyright (c) Tradebook.
# SPDX-License-Identifier: MIT
"""Tradebook API package."""
