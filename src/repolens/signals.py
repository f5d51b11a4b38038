"""Keyword and threshold tables used by the heuristic analyzer.

Tables are ordered tuples read top-to-bottom; detection order follows
table order. Kept as plain data so they can change independently of the
matching logic in ``analyzer``.
"""

from __future__ import annotations

# --- Caps ---

MAX_TECH_STACK = 24
MAX_COMPONENTS = 7
MAX_PATTERNS = 4
MAX_FEATURES = 8
MIN_FEATURES = 4
MAX_USE_CASES = 6
MAX_PERSONAS = 6
MAX_DOMAINS = 6
MAX_DESIGN_DECISIONS = 6
MAX_COMMAND_BLOCKS = 4
MAX_SECTION_LINES = 80
DOMAIN_README_CHARS = 3000
GETTING_STARTED_README_CHARS = 3500

# --- Tech stack ---

# package.json dependency token -> (display name, category)
NODE_DEPENDENCIES = (
    ("react", ("React", "framework")),
    ("vue", ("Vue.js", "framework")),
    ("next", ("Next.js", "framework")),
    ("nuxt", ("Nuxt.js", "framework")),
    ("express", ("Express.js", "framework")),
    ("fastify", ("Fastify", "framework")),
    ("svelte", ("Svelte", "framework")),
    ("nest", ("NestJS", "framework")),
    ("prisma", ("Prisma", "database")),
    ("mongoose", ("MongoDB/Mongoose", "database")),
    ("pg", ("PostgreSQL", "database")),
    ("redis", ("Redis", "database")),
    ("graphql", ("GraphQL", "api")),
    ("jest", ("Jest", "testing")),
    ("vitest", ("Vitest", "testing")),
    ("playwright", ("Playwright", "testing")),
    ("typescript", ("TypeScript", "language")),
    ("tailwindcss", ("Tailwind CSS", "styling")),
)

# requirements.txt token -> (display name, category)
PYTHON_DEPENDENCIES = (
    ("fastapi", ("FastAPI", "framework")),
    ("flask", ("Flask", "framework")),
    ("django", ("Django", "framework")),
    ("sqlalchemy", ("SQLAlchemy", "database")),
    ("celery", ("Celery", "infrastructure")),
    ("pandas", ("Pandas", "data")),
    ("numpy", ("NumPy", "data")),
    ("torch", ("PyTorch", "ai")),
    ("tensorflow", ("TensorFlow", "ai")),
    ("transformers", ("Transformers", "ai")),
)

# (path substrings, (display name, category)); "prefix:" means startswith
TREE_TECH = (
    (("dockerfile", "docker-compose"), ("Docker", "infrastructure")),
    (("prefix:.github/workflows/",), ("GitHub Actions", "ci")),
    (("terraform",), ("Terraform", "infrastructure")),
)

README_TECH = (
    (("kubernetes", "k8s"), ("Kubernetes", "infrastructure")),
    (("postgres",), ("PostgreSQL", "database")),
)

# --- Architecture ---

COMPONENT_SIGNALS = (
    (("prefix:src/", "prefix:app/"),
     ("Application Core", "Primary business logic and runtime modules")),
    (("api", "routes", "controller"),
     ("API Layer", "Exposes application capabilities to clients and integrations")),
    (("web", "frontend", "ui", "pages"),
     ("Client Interface", "User-facing experience and interaction workflows")),
    (("db", "model", "migration"),
     ("Data Layer", "Persistence, schema evolution, and query operations")),
    (("worker", "queue", "job"),
     ("Background Processing", "Async processing for workloads and automation tasks")),
    (("test", "spec"),
     ("Quality Gate", "Automated tests and behavior validation coverage")),
    ((".github/workflows",),
     ("CI Pipeline", "Automated build, test, and release checks")),
    (("docs", "suffix:.md"),
     ("Documentation", "Developer onboarding and operational guidance")),
)

FALLBACK_COMPONENT = ("Core Modules", "Main logic organized around focused feature modules")
SPARSE_COMPONENT_THRESHOLD = 2

# "all:" entries require every listed substring in the same path
PATTERN_SIGNALS = (
    (("all:controller+service",), "Layered service architecture"),
    (("packages/", "apps/"), "Monorepo partitioning"),
    (("cli", "command"), "Command-line orchestration"),
    (("event", "queue", "kafka"), "Event-driven processing"),
    (("plugin", "extension"), "Extensible plugin architecture"),
)

FALLBACK_PATTERN = "Modular project composition"

FALLBACK_DEPLOYMENT = "Source-based deployment with environment configuration"

# --- Readme sections ---

FEATURE_KEYWORDS = ("features", "capabilities", "what it does", "highlights")
USE_CASE_KEYWORDS = ("use case", "who is this for", "examples", "scenarios")
GETTING_STARTED_KEYWORDS = ("getting started", "installation", "quick start", "setup", "install")
DESIGN_KEYWORDS = ("design", "rationale", "why", "philosophy", "approach")

GENERIC_FEATURES = (
    ("Open Source Delivery",
     "Designed for transparent collaboration and community contribution."),
    ("Configurable Workflows",
     "Includes configuration patterns for real-world setup and customization."),
    ("Developer Friendly",
     "Prioritizes practical setup and clear project structure for contributors."),
    ("Reusable Components",
     "Core modules are structured to be adaptable across multiple use cases."),
)

# --- Getting started fallbacks, checked in order ---

MANIFEST_COMMANDS = (
    ("package.json", "npm install\nnpm run build\nnpm start"),
    ("requirements.txt", "pip install -r requirements.txt\npython main.py"),
    ("go.mod", "go mod tidy\ngo run ."),
    ("Cargo.toml", "cargo build\ncargo run"),
)

GENERIC_COMMAND = "git clone <repo-url>\ncd <repo>\n# Follow project README setup steps"
GENERIC_STEPS = (
    "Install dependencies, configure environment, then run the primary "
    "startup command from the repository README."
)

# --- Personas ---

DATA_PERSONA_TOKENS = ("data", "ml", "ai")

DATA_PERSONA = (
    "Data/ML Engineer",
    "Needs production-ready patterns for data workflows.",
    "Combines experimentation and delivery through practical project structure.",
)

PERSONA_CATALOG = (
    ("Software Engineer",
     "Needs maintainable implementation details and fast onboarding.",
     "Clear architecture and setup paths reduce delivery time."),
    ("Platform/DevOps Engineer",
     "Needs reliable deployment and automation coverage.",
     "Tooling and workflow conventions improve operational consistency."),
    ("Product Builder",
     "Needs user-facing value with predictable development effort.",
     "Feature-oriented components enable faster iteration."),
    ("Engineering Leader",
     "Needs confidence in maintainability and project momentum.",
     "Metrics and release signals support governance and investment decisions."),
)

# --- Domains ---

DOMAIN_KEYWORDS = (
    ("healthcare", "Healthcare & Life Sciences"),
    ("finance", "Financial Services"),
    ("fintech", "Financial Technology"),
    ("education", "Education & EdTech"),
    ("devops", "DevOps & Platform Engineering"),
    ("security", "Cybersecurity"),
    ("ecommerce", "E-commerce & Retail"),
    ("retail", "E-commerce & Retail"),
    ("analytics", "Data & Analytics"),
    ("data", "Data & Analytics"),
    ("ml", "Artificial Intelligence & ML"),
    ("ai", "Artificial Intelligence & ML"),
    ("api", "API & Integration"),
    ("cli", "Developer Tooling"),
    ("cloud", "Cloud Infrastructure"),
    ("automation", "Workflow Automation"),
)

DEFAULT_DOMAINS = ("Software Engineering", "Developer Productivity")

# --- Maturity ---

# (signal, threshold, points); a signal scores when its value exceeds threshold
MATURITY_WEIGHTS = (
    ("stars", 100, 2),
    ("stars", 1000, 2),
    ("releases", 0, 2),
    ("releases", 5, 1),
    ("contributors", 3, 1),
    ("contributors", 10, 1),
    ("contributing_guide", 0, 1),
    ("test_paths", 0, 1),
    ("ci_workflows", 0, 1),
)

# (minimum score, level, badge), highest first
MATURITY_LEVELS = (
    (9, "Production-Ready", "green"),
    (6, "Active Development", "yellow"),
    (3, "Early Stage", "orange"),
    (0, "Experimental", "blue"),
)
