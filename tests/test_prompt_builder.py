from jobtracker.services.prompt_builder import build_analysis_prompt


def test_prompt_embeds_inputs_verbatim():
    resume = 'Built {templated} "quoted" things\nin Go'
    jd = "Seeking engineer skilled in Go and distributed systems"

    prompt = build_analysis_prompt(resume, jd)

    assert resume in prompt
    assert jd in prompt
    assert prompt.index(resume) < prompt.index(jd)


def test_prompt_asks_for_the_four_keys():
    prompt = build_analysis_prompt("resume", "job")

    for key in ("matchingKeywords", "missingKeywords", "suggestions", "summary"):
        assert key in prompt
    assert "up to 5" in prompt
    assert "3-5" in prompt


def test_prompt_is_deterministic():
    assert build_analysis_prompt("a", "b") == build_analysis_prompt("a", "b")
