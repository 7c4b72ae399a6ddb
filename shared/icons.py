TWEMOJI_BASE = "https://cdn.jsdelivr.net/gh/twitter/twemoji@14.0.2/assets/72x72"

ALERT_ICON = f"{TWEMOJI_BASE}/26a0.png"
HEART_ICON = f"{TWEMOJI_BASE}/2764.png"
BEATS2_ICON = f"{TWEMOJI_BASE}/1f3b6.png"
MUSIC_NOTE_ICON = f"{TWEMOJI_BASE}/1f3b5.png"
