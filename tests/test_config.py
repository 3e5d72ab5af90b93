import json

from spoonplanner.config import load_config, save_config


def test_defaults_when_missing(tmp_path):
    cfg = load_config(str(tmp_path / "missing.json"))
    assert cfg['autosave_delay_ms'] == 2000
    assert cfg['duplicate_hold_ms'] == 1500
    assert cfg['history_limit'] == 35
    assert cfg['default_limits'] == {'daily': 15, 'weekday': 75, 'weekend': 30}


def test_partial_config_merged(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({'autosave_delay_ms': 500, 'default_limits': {'daily': 12}}), encoding='utf-8')
    cfg = load_config(str(path))
    assert cfg['autosave_delay_ms'] == 500
    assert cfg['history_limit'] == 35
    assert cfg['default_limits'] == {'daily': 12, 'weekday': 75, 'weekend': 30}


def test_broken_config_falls_back(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{oops", encoding='utf-8')
    assert load_config(str(path))['history_limit'] == 35


def test_save_config_roundtrip(tmp_path):
    path = str(tmp_path / "cfg.json")
    cfg = load_config(path)
    cfg['user_id'] = 'sam'
    save_config(cfg, path)
    assert load_config(path)['user_id'] == 'sam'
