import logging

import pytest

from stratalloc.config import load_survey_config, reference_survey, survey_from_dict
from stratalloc.errors import ConfigurationError
from stratalloc.sampling import AllocationMethod, AllocationService

SURVEY_TOML = """
[survey]
margin_of_error = 1.5
confidence_z = 1.96

[[strata]]
id = 1
population_size = 4000
std_dev = 10.0
unit_cost = 4.0
unit_time = 1.0

[[strata]]
id = 2
population_size = 3000
std_dev = 20.0
unit_cost = 6.0
unit_time = 1.5

[[strata]]
id = 3
population_size = 2000
std_dev = 30.0
unit_cost = 8.0
unit_time = 2.0

[[strata]]
id = 4
population_size = 1000
std_dev = 40.0
unit_cost = 10.0
unit_time = 2.5
"""


@pytest.fixture
def survey_file(tmp_path):
    path = tmp_path / "survey.toml"
    path.write_text(SURVEY_TOML, encoding="utf-8")
    return path


def _cfg(**survey):
    return {
        "survey": survey,
        "strata": [{"id": "a", "population_size": 10, "std_dev": 1.0, "unit_cost": 1.0}],
    }


class TestLoadSurveyConfig:
    def test_matches_reference(self, survey_file):
        inputs = load_survey_config(survey_file)
        assert inputs == reference_survey()

    def test_results(self, survey_file):
        inputs = load_survey_config(str(survey_file))
        result = AllocationService.calculate(inputs, AllocationMethod.PROPORTIONAL)
        assert result.total_sample_size == 787

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_survey_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[survey\nmargin_of_error = ", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_survey_config(path)


class TestSurveyFromDict:
    def test_confidence_level(self):
        inputs = survey_from_dict(_cfg(margin_of_error=0.5, confidence_level=99.0))
        assert inputs.confidence_z is None
        assert inputs.z_score == 2.576

    def test_default_confidence_level(self):
        inputs = survey_from_dict(_cfg(margin_of_error=0.5))
        assert inputs.z_score == 1.96

    def test_missing_survey_table(self):
        with pytest.raises(ConfigurationError, match=r"\[survey\]"):
            survey_from_dict({"strata": []})

    def test_missing_margin(self):
        with pytest.raises(ConfigurationError, match="margin_of_error"):
            survey_from_dict(_cfg(confidence_z=1.96))

    def test_both_confidence_keys(self):
        with pytest.raises(ConfigurationError, match="only one"):
            survey_from_dict(_cfg(margin_of_error=1.0, confidence_z=1.96, confidence_level=95.0))

    def test_no_strata(self):
        with pytest.raises(ConfigurationError, match="strata"):
            survey_from_dict({"survey": {"margin_of_error": 1.0}, "strata": []})

    def test_stratum_missing_key(self):
        cfg = _cfg(margin_of_error=1.0)
        del cfg["strata"][0]["unit_cost"]
        with pytest.raises(ConfigurationError, match="unit_cost"):
            survey_from_dict(cfg)

    def test_stratum_unknown_key(self):
        cfg = _cfg(margin_of_error=1.0)
        cfg["strata"][0]["weight"] = 0.5
        with pytest.raises(ConfigurationError, match="weight"):
            survey_from_dict(cfg)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            survey_from_dict({})

    @pytest.mark.parametrize(
        "key, value",
        [
            ("margin_of_error", "1.5"),
            ("confidence_z", "1.96"),
            ("confidence_level", "95"),
            ("margin_of_error", True),
        ],
    )
    def test_survey_value_must_be_number(self, key, value):
        survey = {"margin_of_error": 1.5, key: value}
        with pytest.raises(ConfigurationError, match=f"{key} must be a number"):
            survey_from_dict(_cfg(**survey))

    @pytest.mark.parametrize(
        "key, value",
        [
            ("population_size", "4000"),
            ("std_dev", "10"),
            ("unit_cost", "4.0"),
            ("unit_time", "1.0"),
        ],
    )
    def test_stratum_value_must_be_number(self, key, value):
        cfg = _cfg(margin_of_error=1.0)
        cfg["strata"][0][key] = value
        with pytest.raises(ConfigurationError, match=f"{key} must be a number"):
            survey_from_dict(cfg)


class TestSurveyLogging:
    def test_logging_table_is_applied(self, tmp_path, stratalloc_logger):
        path = tmp_path / "survey.toml"
        path.write_text(
            SURVEY_TOML + '\n[logging.loggers.stratalloc]\nlevel = "ERROR"\n',
            encoding="utf-8",
        )

        inputs = load_survey_config(path)

        assert inputs == reference_survey()
        assert stratalloc_logger.level == logging.ERROR

    def test_log_config_file(self, tmp_path, survey_file, stratalloc_logger):
        log_cfg = tmp_path / "logging.toml"
        log_cfg.write_text(
            "version = 1\n"
            "disable_existing_loggers = false\n"
            "[loggers.stratalloc]\n"
            'level = "WARNING"\n',
            encoding="utf-8",
        )

        load_survey_config(survey_file, log_config=log_cfg)

        assert stratalloc_logger.level == logging.WARNING

    def test_missing_log_config_file(self, tmp_path, survey_file):
        with pytest.raises(FileNotFoundError):
            load_survey_config(survey_file, log_config=tmp_path / "missing.toml")

    def test_logging_must_be_table(self, tmp_path):
        path = tmp_path / "survey.toml"
        path.write_text('logging = "verbose"\n' + SURVEY_TOML, encoding="utf-8")
        with pytest.raises(ConfigurationError, match=r"\[logging\]"):
            load_survey_config(path)
