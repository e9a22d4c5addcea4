"""Prompt templates. Placeholders are `{name}` tokens filled by `render`."""

CATEGORY_HINT = (
    "Programming Languages, Frameworks & Libraries, Databases, Cloud Platforms, DevOps & Tools, "
    "Soft Skills, Design & UX, Data Science & ML, Mobile Development, Web Technologies, Security, Testing & QA"
)


def render(template: str, **values: str) -> str:
    # Plain token replacement: templates contain literal JSON braces, so str.format is unusable.
    rendered = template
    for key, value in values.items():
        rendered = rendered.replace("{" + key + "}", value)
    return rendered


RESUME_SKILLS_SYSTEM = (
    "You are an expert at analyzing resumes and extracting technical skills. "
    "Return only valid JSON array of skills."
)

RESUME_SKILLS = """You are an expert at analyzing resumes and extracting technical skills.

Given the following resume text, extract all technical skills and categorize them. For each skill, determine the appropriate level (beginner, intermediate, advanced, expert) based on context clues.

Resume text:
{resumeText}

Please return a JSON array of skills in this format:
[
  {
    "name": "skill name",
    "category": "category from: {categories}",
    "level": "beginner|intermediate|advanced|expert",
    "confidence": 0.95
  }
]

Only return valid JSON, no additional text."""

JOB_SKILLS_SYSTEM = (
    "You are an expert at analyzing job descriptions and extracting technical skills. Return only valid JSON."
)

JOB_SKILLS = """You are an expert at analyzing job descriptions and extracting technical skills.

Given the following job description, extract all technical skills and categorize them as either required or preferred.

Job description:
{description}

Please return a JSON object in this format:
{
  "required": [
    {
      "name": "skill name",
      "category": "category from: {categories}",
      "level": "beginner|intermediate|advanced|expert"
    }
  ],
  "preferred": [
    {
      "name": "skill name",
      "category": "category",
      "level": "beginner|intermediate|advanced|expert"
    }
  ]
}

Only return valid JSON, no additional text."""

RESOURCE_SKILLS_SYSTEM = (
    "You are an expert at analyzing learning resources and extracting technical skills. "
    "Return only a valid JSON array of skill names."
)

RESOURCE_SKILLS = """You are an expert at analyzing learning resources and extracting relevant technical skills.

Given the following learning resource information, extract all technical skills that someone would learn from this resource.

Title: {title}
Type: {type}
Description: {description}

Please return a JSON array of skill names (strings only). Focus on technical skills, programming languages, frameworks, tools, and technologies.

Example format:
["JavaScript", "React", "Node.js", "MongoDB", "REST APIs"]

Only return valid JSON array, no additional text."""

GAP_ANALYSIS_SYSTEM = (
    "You are an expert at analyzing skill gaps and providing career development advice. Return only valid JSON."
)

GAP_ANALYSIS = """You are an expert at analyzing skill gaps between current skills and job requirements.

Current skills: {currentSkills}
Required skills: {requiredSkills}

Analyze the gaps and return a JSON object with:
{
  "skillGaps": [
    {
      "skill": "skill name",
      "currentLevel": "beginner|intermediate|advanced|expert",
      "requiredLevel": "beginner|intermediate|advanced|expert",
      "gap": "none|small|medium|large",
      "priority": "low|medium|high"
    }
  ],
  "overallGap": "small|medium|large",
  "recommendedFocus": ["skill1", "skill2"],
  "estimatedTimeToClose": 12
}

Only return valid JSON, no additional text."""

INSIGHTS_SYSTEM = "You are an expert career advisor. Return only valid JSON."

INSIGHTS = """Analyze the following skills and provide insights:

Skills: {skills}

Provide insights in JSON format:
{
  "strengths": ["skill1", "skill2"],
  "weaknesses": ["skill1", "skill2"],
  "recommendations": ["recommendation1", "recommendation2"],
  "marketDemand": "high|medium|low",
  "growthAreas": ["area1", "area2"]
}"""

LEARNING_PATH_SYSTEM = (
    "You are an expert career development advisor. Create personalized learning paths. Return only valid JSON."
)

LEARNING_PATH = """You are an expert at creating personalized learning paths for skill development.

Skill gaps to address: {skillGaps}
Learner preferences: {preferences}

Create a learning path with resources and timeline. Return JSON:
{
  "resources": [
    {
      "title": "resource title",
      "type": "course|book|video|article|project",
      "url": "resource url",
      "difficulty": "beginner|intermediate|advanced",
      "estimatedHours": 20,
      "cost": "free|paid|freemium"
    }
  ],
  "estimatedTimeline": 16,
  "priorityOrder": ["skill1", "skill2"],
  "learningStrategy": "Focus on high-priority skills first, then build foundational knowledge"
}

Only return valid JSON, no additional text."""
