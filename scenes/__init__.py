"""scenes — The exploration scene and its per-frame helpers."""
