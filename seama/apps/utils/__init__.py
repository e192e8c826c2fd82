#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2024-2025 Seama contributors
#
# SPDX-License-Identifier: BSD-3-Clause

"""Helpers shared by Seama command line applications."""
