
publication_profile = """
GenAI4Code News is a top AI tech publication for engineers and technical leaders.
Stories cover model releases, benchmarks, hardware, research and the business of AI.
Articles are specific, fact-based and technical. No hype and no generic "AI is growing" pieces.
"""

publication_guardrails = """
<Publication Guardrails>
1. Stick to facts found in the research data. Do not invent numbers, quotes or releases.
2. When the research is thin, say what is known and what is not, instead of speculating.
3. Professional, technical, objective tone. No fluff, no marketing language.
</Publication Guardrails>
"""
