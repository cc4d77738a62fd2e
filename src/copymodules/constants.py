from __future__ import annotations

# Replaces every ".." segment of a destination path so it stays under the output root.
PARENT_DIR_SENTINEL = "__..__"
PARENT_DIR_TOKEN = ".."

DEFAULT_MANIFEST_NAME = "package.json"

EMIT_PHASE = "emit"
PLUGIN_NAME = "CopyModulesPlugin"

ENV_PREFIX = "COPY_MODULES_"
