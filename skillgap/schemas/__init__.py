from skillgap.schemas.analysis import AnalysisSummary, AnalyzeRequest, AnalyzeResponse, SkillAnalysisDetail, SkillAnalysisRead
from skillgap.schemas.job_description import JobDescriptionCreate, JobDescriptionRead, JobDescriptionResponse
from skillgap.schemas.learning import GeneratePathRequest, LearningPathRead, PathPlan, PathResource, ResourceCreate, ResourceRead
from skillgap.schemas.resume import ResumeRead, ResumeUploadResponse
from skillgap.schemas.skills import GapAnalysisResult, GapSize, OverallGap, Priority, Skill, SkillCategory, SkillGap, SkillLevel
from skillgap.schemas.user import SigninRequest, SignupRequest, Token, TokenData, UserRead

__all__ = [
	"AnalysisSummary",
	"AnalyzeRequest",
	"AnalyzeResponse",
	"SkillAnalysisDetail",
	"SkillAnalysisRead",
	"JobDescriptionCreate",
	"JobDescriptionRead",
	"JobDescriptionResponse",
	"GeneratePathRequest",
	"LearningPathRead",
	"PathPlan",
	"PathResource",
	"ResourceCreate",
	"ResourceRead",
	"ResumeRead",
	"ResumeUploadResponse",
	"GapAnalysisResult",
	"GapSize",
	"OverallGap",
	"Priority",
	"Skill",
	"SkillCategory",
	"SkillGap",
	"SkillLevel",
	"SigninRequest",
	"SignupRequest",
	"Token",
	"TokenData",
	"UserRead",
]
