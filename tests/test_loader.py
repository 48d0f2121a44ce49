import pytest

from passphrase import PassphraseContext, Rule, RuleSet, RuleSetLoadError, validate
from passphrase.rules.collaborators import WordListDictionary
from passphrase.rules.loader import EXAMPLE_RULES_FILE, RuleSource, load_ruleset, resolve_ruleset
from passphrase.status import RULE_ERROR_CODE


def write_rules(tmp_path, text):
    path = tmp_path / "rules.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def outcome_for(ruleset, passphrase, **kwargs):
    return validate(PassphraseContext(passphrase=passphrase, ruleset=ruleset, **kwargs))


def test_loads_rules_in_file_order(tmp_path):
    path = write_rules(
        tmp_path,
        """
constants:
  minimum_total_characters: 15
rules:
  - code: 450
    message: is too short
    test: XXXXXXXXXXXXXX
    validate:
      min_length: {minimum: $minimum_total_characters}
  - code: 451
    message: does not contain enough words
    test: [onewordonlyhere, stilljustoneword]
    validate:
      min_words: {minimum: 2}
""",
    )

    ruleset = load_ruleset(path)

    assert [rule.code for rule in ruleset] == [450, 451]
    assert ruleset.source == str(path)
    assert ruleset[1].test == ("onewordonlyhere", "stilljustoneword")
    assert outcome_for(ruleset, "XXXXXXXXXXXXXX").code == 450
    assert outcome_for(ruleset, "onewordonlyhere").code == 451
    assert outcome_for(ruleset, "this is fifteen").accepted


def test_bare_list_document(tmp_path):
    path = write_rules(
        tmp_path,
        """
- code: 452
  message: contains a digit
  validate:
    forbid_pattern: {pattern: "[0-9]"}
""",
    )

    ruleset = load_ruleset(path)

    assert outcome_for(ruleset, "has 1 digit").code == 452


def test_empty_rule_list_is_valid_and_accepts(tmp_path):
    path = write_rules(tmp_path, "rules: []\n")

    ruleset = load_ruleset(path)

    assert len(ruleset) == 0
    assert outcome_for(ruleset, "x").accepted


def test_rule_without_validate_is_kept(tmp_path):
    path = write_rules(tmp_path, "- code: 460\n  message: documents only\n  test: abc\n")

    ruleset = load_ruleset(path)

    assert ruleset[0].validate is None
    assert outcome_for(ruleset, "abc").accepted


@pytest.mark.parametrize(
    "text",
    [
        "",
        "just a string\n",
        "rules: {code: 450}\n",
        "- not a mapping\n",
        "rules: [\n",
        "extra: 1\nrules: []\n",
        "- code: four hundred\n",
        "- code: 550\n  message: clashes with rule error\n",
        "- code: 450\n  colour: red\n",
        "- code: 450\n  validate: no_such_predicate\n",
        "- code: 450\n  validate:\n    min_length: {minimum: $undefined}\n",
        "- code: 450\n  validate:\n    min_length: {minimum: -3}\n",
        "- code: 450\n  validate:\n    min_length: {maximum: 3}\n",
        "- code: 450\n  validate:\n    forbid_pattern: {pattern: '[unclosed'}\n",
        "- code: 450\n  validate: not_in_dictionary\n",
        "- code: 450\n  test: {nested: mapping}\n",
        "- code: 450\n  validate: [min_length, max_length]\n",
    ],
)
def test_invalid_definitions_raise_load_error(tmp_path, text):
    path = write_rules(tmp_path, text)

    with pytest.raises(RuleSetLoadError) as excinfo:
        load_ruleset(path)

    assert excinfo.value.path == str(path)
    assert str(path) in str(excinfo.value)


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(RuleSetLoadError) as excinfo:
        load_ruleset(tmp_path / "missing.yaml")

    assert isinstance(excinfo.value.cause, OSError)


def test_rule_files_cannot_supply_collaborators(tmp_path):
    path = write_rules(tmp_path, "- code: 450\n  validate:\n    not_in_dictionary: {dictionary: [a]}\n")

    with pytest.raises(RuleSetLoadError):
        RuleSource(dictionary=WordListDictionary(["a"])).load(path)


def test_collaborators_are_injected(tmp_path):
    path = write_rules(
        tmp_path,
        "- code: 457\n  message: is a well-known phrase\n  validate: not_in_dictionary\n",
    )
    dictionary = WordListDictionary(["correct horse battery staple"])

    ruleset = RuleSource(dictionary=dictionary).load(path)

    assert outcome_for(ruleset, "Correct  Horse Battery Staple").code == 457
    assert outcome_for(ruleset, "incorrect horse battery staple").accepted


def test_rule_files_never_execute_code(tmp_path):
    path = write_rules(tmp_path, "- code: !!python/object/apply:os.system ['true']\n")

    with pytest.raises(RuleSetLoadError):
        load_ruleset(path)


def test_example_rules_file_loads():
    ruleset = load_ruleset(EXAMPLE_RULES_FILE)

    assert ruleset[0].code == 450
    assert outcome_for(ruleset, "XXXXXXXXXXXXXX").code == 450
    assert outcome_for(ruleset, "plum orchards bloom in April").accepted
    assert all(rule.code != RULE_ERROR_CODE for rule in ruleset)


def test_resolve_ruleset_rejects_other_types():
    with pytest.raises(TypeError):
        resolve_ruleset(42)


def test_inline_specs_reject_bad_records():
    with pytest.raises(RuleSetLoadError) as excinfo:
        RuleSet.from_specs([{"code": 450}, {"code": "x"}])

    assert excinfo.value.path is None
    assert "rule 1" in str(excinfo.value)


def test_inline_specs_accept_rule_objects():
    rule = Rule(code=450, message="is too short")

    ruleset = RuleSet.from_specs([rule, {"code": 451}])

    assert ruleset[0] is rule
    assert ruleset.source is None


def test_undecodable_rules_file_raises_load_error(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_bytes(b"- code: 450\n  message: is \xff\xfe short\n")

    with pytest.raises(RuleSetLoadError) as excinfo:
        load_ruleset(path)

    assert excinfo.value.path == str(path)
    assert str(path) in str(excinfo.value)


def test_rule_name_must_be_a_string(tmp_path):
    path = write_rules(tmp_path, "- name: 123\n  code: 450\n")

    with pytest.raises(RuleSetLoadError, match="rule name must be a string"):
        load_ruleset(path)
    with pytest.raises(TypeError):
        Rule(code=450, name=123)
