# Structured log event names (logged as `extra={'event': ...}`)
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
SHORTEN_DEDUPLICATED = 'SHORTEN_DEDUPLICATED'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
SHORTCODE_GENERATION_EXHAUSTED = 'SHORTCODE_GENERATION_EXHAUSTED'
TARGET_REJECTED = 'TARGET_REJECTED'
RESOLVE_SUCCESS = 'RESOLVE_SUCCESS'
RESOLVE_NOT_FOUND = 'RESOLVE_NOT_FOUND'
