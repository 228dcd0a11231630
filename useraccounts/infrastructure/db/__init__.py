# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import Base, Database, init_db

__all__ = ["Base", "Database", "init_db"]
