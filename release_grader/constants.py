# Entrius 2025
# =============================================================================
# General
# =============================================================================
SECONDS_PER_DAY = 86400
DAYS_PER_WEEK = 7

# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
BASE_GITHUB_URL = "https://github.com"
GITHUB_API_TIMEOUT = 30  # seconds
GITHUB_PAGE_SIZE = 100

# Status codes treated as success by the issue workflow
HTTP_OK = 200
HTTP_CREATED = 201

# =============================================================================
# Releases & Projects
# =============================================================================
RELEASE_TAG_PATTERN = r'^v([1-4])\.(\d+)\.(\d+)$'
PROJECT_NUMBERS = (1, 2, 3, 4)

# =============================================================================
# Grading
# =============================================================================
FULL_GRADE = 100
LATE_PENALTY_PER_WEEK = 10  # percentage points per late week

# Deadlines are civil dates with an implicit end-of-day cutoff
DEADLINE_CUTOFF_HOUR = 23
DEADLINE_CUTOFF_MINUTE = 59
DEADLINE_CUTOFF_SECOND = 59
DEFAULT_REFERENCE_TIMEZONE = 'America/Los_Angeles'

# =============================================================================
# Tracking Issues & Milestones
# =============================================================================
ISSUE_TITLE_FORMAT = 'Project {release} {type} Grade'
PROJECT_LABEL_FORMAT = 'project{project}'
MILESTONE_TITLE_FORMAT = 'Project {project}'
MILESTONE_DESCRIPTION_FORMAT = 'Project {project} {name}'

# Design requests may coexist with exactly one functionality issue
DESIGN_MAX_PRIOR_ISSUES = 1

# =============================================================================
# State Store
# =============================================================================
DEFAULT_STATE_FILE = '.grade-request/state.json'
REQUIRED_STATE_KEYS = ('release', 'type', 'releaseDate', 'releaseUrl', 'runId', 'runNumber', 'runUrl')
