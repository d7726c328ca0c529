# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Members portal: signup, login, members-only pages and admin role management."""

__version__ = "0.1.0"
