import json
import logging
import os


def _defaults():
    return {
        'user_id': 'local',
        'autosave_delay_ms': 2000,
        'duplicate_hold_ms': 1500,
        'history_limit': 35,
        'default_limits': {
            'daily': 15,
            'weekday': 75,
            'weekend': 30,
        },
    }


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.spoonplanner')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'spoonplanner_config.json')


def load_config(path: str = None):
    path = path or _config_path()
    cfg = _defaults()
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except Exception as e:
        logging.error(f"[SpoonPlanner] Config unreadable, using defaults: {e}")
        return cfg
    if not isinstance(stored, dict):
        return cfg
    limits = stored.pop('default_limits', None)
    cfg.update(stored)
    if isinstance(limits, dict):
        cfg['default_limits'].update(limits)
    return cfg


def save_config(cfg: dict, path: str = None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
