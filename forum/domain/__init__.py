# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users import Identity, SessionToken, StoredCredential, TokenState

__all__ = ["Identity", "SessionToken", "StoredCredential", "TokenState"]
