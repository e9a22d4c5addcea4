from skillgap.models.job_description import JobDescription
from skillgap.models.learning_path import LearningPath
from skillgap.models.learning_resource import LearningResource
from skillgap.models.resume import Resume
from skillgap.models.skill_analysis import SkillAnalysis
from skillgap.models.user import User

__all__ = [
	"JobDescription",
	"LearningPath",
	"LearningResource",
	"Resume",
	"SkillAnalysis",
	"User",
]
