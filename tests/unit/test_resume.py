from engines.resume import CandidateProfile, estimate_experience, parse_profile, profile_prompt

RESUME = """Jane Doe
jane@example.com
Senior Software Engineer with 8 years of experience
Skills: Python, Django, PostgreSQL, Docker, Kubernetes, AWS, React
Led a team of 6 engineers and reduced latency by 40%
B.S. Computer Science
"""


def test_parse_profile_extracts_skills_and_level():
    profile = parse_profile(RESUME)
    assert profile.candidate_name == "Jane Doe"
    assert profile.experience_level == "senior"
    assert profile.estimated_years == 8
    assert profile.skills.by_category["Cloud & DevOps"] == ["aws", "docker", "kubernetes"]
    assert profile.skills.by_category["Databases"] == ["postgresql"]
    assert profile.skills.count == 7
    assert [area.area for area in profile.expertise] == [
        "Cloud & DevOps",
        "Programming Languages",
        "Frontend Frameworks",
    ]
    assert "Bachelor's" in profile.education.degrees
    assert profile.education.is_cs_related is True
    assert profile.achievements == ["reduced latency by 40%", "Led a team of 6"]


def test_skills_match_whole_tokens_only():
    profile = parse_profile("Worked with Golang and C++ daily")
    assert profile.skills.by_category["Programming Languages"] == ["c++", "golang"]


def test_blank_resume_yields_empty_profile():
    assert parse_profile("   ") == CandidateProfile()
    assert parse_profile(None) == CandidateProfile()
    seeding = profile_prompt(CandidateProfile())
    assert seeding.difficulty_override is None
    assert seeding.system_prompt_addition == ""


def test_experience_defaults_to_mid():
    assert estimate_experience("") == "mid"
    assert estimate_experience("junior bootcamp graduate") == "junior"


def test_profile_prompt_seeds_session():
    seeding = profile_prompt(parse_profile(RESUME))
    assert seeding.difficulty_override == 2
    assert seeding.experience_level == "senior"
    assert "CANDIDATE RESUME CONTEXT:" in seeding.system_prompt_addition
    assert [topic.topic for topic in seeding.suggested_topics][-1] == "Achievements"
    assert len(seeding.suggested_topics) == 4


def test_junior_resume_starts_easy():
    seeding = profile_prompt(parse_profile("Junior developer, recent bootcamp graduate. Knows JavaScript."))
    assert seeding.experience_level == "junior"
    assert seeding.difficulty_override == 1
