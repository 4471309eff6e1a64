"""Stack templates offered during the stack-selection phase.

Predefined technology stacks grouped into five levels, from a single
frontend on a managed backend up to web + mobile products sharing one
database. Users pick one of these templates rather than composing
individual components.
"""

from .models import TechStack

# ========== Stack Templates ==========

STACK_TEMPLATES: dict[str, TechStack] = {
    # ========== Level 1 - Beginner ==========
    "react-supabase": TechStack(
        id="react-supabase",
        name="React + Supabase",
        level="beginner",
        level_number=1,
        frontend="React",
        backend="Supabase Edge Functions (optional)",
        database="Supabase",
        benefits=["Fastest to build", "Best for small apps, dashboards", "Full auth + storage ready"],
        use_cases=["Dashboards", "Small web apps", "Prototypes"],
    ),
    # ========== Level 2 - Intermediate ==========
    "react-express-supabase": TechStack(
        id="react-express-supabase",
        name="React + Node.js (Express) + Supabase",
        level="intermediate",
        level_number=2,
        frontend="React",
        backend="Express.js",
        database="Supabase",
        benefits=["Classic JavaScript stack", "Simple REST APIs"],
        use_cases=["Web applications", "REST APIs"],
    ),
    "react-nestjs-supabase": TechStack(
        id="react-nestjs-supabase",
        name="React + NestJS + Supabase",
        level="intermediate",
        level_number=2,
        frontend="React",
        backend="NestJS",
        database="Supabase",
        benefits=["TypeScript everywhere", "Enterprise architecture"],
        use_cases=["Enterprise apps", "Scalable APIs"],
    ),
    # ========== Level 3 - Advanced ==========
    "nextjs-supabase": TechStack(
        id="nextjs-supabase",
        name="Next.js + Supabase",
        level="advanced",
        level_number=3,
        frontend="Next.js",
        backend="Next.js API Routes / Server Actions",
        database="Supabase",
        benefits=["Full-stack in one app", "Best for SaaS", "Real-time features easy"],
        use_cases=["SaaS applications", "Modern web apps"],
    ),
    "nextjs-nestjs-supabase": TechStack(
        id="nextjs-nestjs-supabase",
        name="Next.js + NestJS + Supabase",
        level="advanced",
        level_number=3,
        frontend="Next.js",
        backend="NestJS or Express",
        database="Supabase",
        benefits=["Separate backend for scalability", "Clean project structure"],
        use_cases=["Large applications", "Microservices"],
    ),
    "nextjs-fastapi-supabase": TechStack(
        id="nextjs-fastapi-supabase",
        name="Next.js + FastAPI + Supabase",
        level="advanced",
        level_number=3,
        frontend="Next.js",
        backend="FastAPI",
        database="Supabase",
        benefits=["Python + TypeScript combo", "Great for AI + automation"],
        use_cases=["AI applications", "Data processing"],
    ),
    # ========== Level 4 - Mobile ==========
    "expo-supabase": TechStack(
        id="expo-supabase",
        name="React Native (Expo) + Supabase",
        level="mobile",
        level_number=4,
        frontend="React Native",
        mobile="Expo",
        backend="Supabase Edge Functions",
        database="Supabase",
        benefits=["Perfect for mobile apps", "Real-time chats, auth, file upload"],
        use_cases=["Mobile applications", "Cross-platform apps"],
    ),
    "expo-nextjs-supabase": TechStack(
        id="expo-nextjs-supabase",
        name="React Native + Next.js + Supabase",
        level="mobile",
        level_number=4,
        frontend="Next.js",
        mobile="React Native (Expo)",
        backend="Next.js",
        database="Supabase",
        benefits=[
            "Both web + mobile connected",
            "One database for all",
            "Best for social apps, ecommerce, SaaS",
        ],
        use_cases=["Social apps", "Ecommerce", "SaaS with mobile"],
    ),
    "expo-fastapi-supabase": TechStack(
        id="expo-fastapi-supabase",
        name="React Native + FastAPI + Supabase",
        level="mobile",
        level_number=4,
        frontend="React Native",
        mobile="Expo",
        backend="FastAPI",
        database="Supabase",
        benefits=["Python backend for ML/AI workflows", "Very powerful and flexible"],
        use_cases=["AI-powered mobile apps", "ML applications"],
    ),
    # ========== Level 5 - Ultimate ==========
    "nextjs-supabase-expo": TechStack(
        id="nextjs-supabase-expo",
        name="Next.js + Supabase + React Native (Expo)",
        level="ultimate",
        level_number=5,
        frontend="Next.js (Web)",
        mobile="React Native (Expo)",
        backend="Next.js API / Server Actions",
        database="Supabase",
        benefits=[
            "Single backend",
            "Works beautifully with Supabase",
            "Supports mobile + web + real-time",
        ],
        use_cases=["Full-stack applications", "Multi-platform products"],
    ),
}

# Stored on new sessions until the user picks a real stack
PLACEHOLDER_STACK = TechStack(
    id="placeholder",
    name="Placeholder",
    level="beginner",
    level_number=1,
    frontend="React",
    database="Supabase",
)


def get_stack(stack_id: str) -> TechStack:
    """Look up a stack template by ID.

    Raises:
        ValueError: If the ID is not a known template
    """
    stack = STACK_TEMPLATES.get(stack_id)
    if stack is None:
        valid = ", ".join(sorted(STACK_TEMPLATES))
        raise ValueError(f"Unknown stack '{stack_id}'. Valid options: {valid}")
    return stack.model_copy(deep=True)


def get_stacks_for_level(level_number: int) -> list[TechStack]:
    """Return the templates of one level, in catalogue order."""
    return [stack for stack in STACK_TEMPLATES.values() if stack.level_number == level_number]
