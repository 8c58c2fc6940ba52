"""
Writing style constraint shared by every prose-producing generation call.
"""

BANNED_WORDS = [
    "delve", "realm", "harness", "unlock", "tapestry", "paradigm", "cutting-edge", "revolutionize",
    "landscape", "potential", "findings", "intricate", "showcasing", "crucial", "pivotal", "surpass",
    "meticulously", "vibrant", "unparalleled", "underscore", "leverage", "synergy", "innovative",
    "game-changer", "testament", "commendable", "meticulous", "highlight", "emphasize", "boast",
    "groundbreaking", "align", "foster", "showcase", "enhance", "holistic", "garner", "accentuate",
    "pioneering", "trailblazing", "unleash", "versatile", "transformative", "redefine", "seamless",
    "optimize", "scalable", "robust", "breakthrough", "empower", "streamline", "intelligent", "smart",
    "next-gen", "frictionless", "elevate", "adaptive", "effortless", "data-driven", "insightful",
    "proactive", "mission-critical", "visionary", "disruptive", "reimagine", "agile", "customizable",
    "personalized", "unprecedented", "intuitive", "leading-edge", "synergize", "democratize",
    "automate", "accelerate", "state-of-the-art", "dynamic", "reliable", "efficient", "cloud-native",
    "immersive", "predictive", "transparent", "proprietary", "integrated", "plug-and-play", "turnkey",
    "future-proof", "open-ended", "AI-powered", "next-generation", "always-on", "hyper-personalized",
    "results-driven", "machine-first", "paradigm-shifting",
]

BANNED_WORDS_INSTRUCTION = f"""
STRICT STYLE GUIDELINE:
Do NOT use the following words or phrases in your response: {", ".join(BANNED_WORDS)}.
Instead, use simple, direct, and professional language. Focus on facts, actions, and results.
"""
