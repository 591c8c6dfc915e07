"""Starter .patchpick.toml template."""

DEFAULT_TOML = """\
# patchpick configuration
version = "1.0"

[patch]
default_name = "changes.patch"   # suggested file name for `patchpick create`
unified = 3                      # context lines per hunk

[git]
timeout = 30                     # seconds before a git call is treated as hung

[split]
output_dir = "."
extension = ".patch"
separator = "_"                  # replaces '/' and the final '.' in file names
on_collision = "error"           # error | suffix

[output]
show_summary = true
"""
