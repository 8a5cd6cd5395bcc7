import json

from tools.check_vocabulary import check, raw_record_counts
from words_quiz.config import DATA_DIR


def test_bundled_vocabulary_has_no_problems(capsys):
    assert check(DATA_DIR / "ukrainian_vocabulary.json") == []
    assert "nouns" in capsys.readouterr().out


def test_broken_records_are_reported(vocabulary_file):
    assert raw_record_counts(vocabulary_file) == {"nouns": 4, "verbs": 2, "adjectives": 1}
    problems = check(vocabulary_file)
    assert any(p.startswith("nouns: 2") for p in problems)
    assert any(p.startswith("verbs: 1") for p in problems)


def test_unknown_category_and_duplicates(tmp_path):
    path = tmp_path / "words.json"
    path.write_text(
        json.dumps(
            {
                "verbs": [
                    {"word": "бігти", "meaning": "to run", "categories": ["Sport"]},
                    {"word": "бігти", "meaning": "to run", "categories": []},
                ]
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )
    problems = check(path)
    assert "verbs: 未知のカテゴリ Sport" in problems
    assert "verbs: 重複した単語 бігти" in problems


def test_missing_file_is_a_problem(tmp_path):
    problems = check(tmp_path / "none.json")
    assert len(problems) == 1
