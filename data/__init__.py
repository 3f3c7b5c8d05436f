"""data — Static content (TOML) and the authored zone blueprints."""
