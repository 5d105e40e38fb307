import config


def test_int_env_reads_value(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_TEST_INT", "17")
    assert config._int_env("SNOWFLAKE_TEST_INT", 0) == 17


def test_int_env_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_TEST_INT", "seventeen")
    assert config._int_env("SNOWFLAKE_TEST_INT", 3) == 3


def test_int_env_falls_back_when_unset(monkeypatch):
    monkeypatch.delenv("SNOWFLAKE_TEST_INT", raising=False)
    assert config._int_env("SNOWFLAKE_TEST_INT", 4) == 4


def test_float_env(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_TEST_FLOAT", "0.001")
    assert config._float_env("SNOWFLAKE_TEST_FLOAT", 0.0) == 0.001
    monkeypatch.setenv("SNOWFLAKE_TEST_FLOAT", "fast")
    assert config._float_env("SNOWFLAKE_TEST_FLOAT", 0.5) == 0.5


def test_spin_sleep_is_never_negative():
    assert config.SPIN_SLEEP >= 0


def test_log_level_accepts_known_names(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_TEST_LEVEL", "debug")
    assert config._log_level_env("SNOWFLAKE_TEST_LEVEL", "INFO") == "DEBUG"


def test_log_level_falls_back_on_unknown_name(monkeypatch):
    monkeypatch.setenv("SNOWFLAKE_TEST_LEVEL", "VERBOSE")
    assert config._log_level_env("SNOWFLAKE_TEST_LEVEL", "INFO") == "INFO"


def test_log_level_falls_back_when_unset(monkeypatch):
    monkeypatch.delenv("SNOWFLAKE_TEST_LEVEL", raising=False)
    assert config._log_level_env("SNOWFLAKE_TEST_LEVEL", "WARNING") == "WARNING"
