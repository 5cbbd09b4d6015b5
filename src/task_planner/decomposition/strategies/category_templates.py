"""Step templates per task category.

These tables are versioned planning policy. Hour constants and fractions are
kept exactly as published; change TEMPLATE_VERSION when editing them.
"""

from typing import Dict, Tuple
from .template_strategy import TemplateStep
from ...models.planning_models import TaskCategory

TEMPLATE_VERSION = 1

C = TaskCategory

DEVELOPMENT_STEPS = (
    TemplateStep("Setup Development Environment", C.CONFIGURATION, hours=2),
    TemplateStep("Review Requirements", C.ANALYSIS, hours=1),
    TemplateStep("Create Technical Design", C.DESIGN, hours=4),
    TemplateStep("Implement Core Functionality", C.DEVELOPMENT, fraction=0.4),
    TemplateStep("Implement Error Handling", C.DEVELOPMENT, fraction=0.2),
    TemplateStep("Code Review", C.DEVELOPMENT, hours=2),
    TemplateStep("Unit Testing", C.TESTING, fraction=0.3),
    TemplateStep("Integration Testing", C.TESTING, fraction=0.2),
    TemplateStep("Documentation Update", C.DOCUMENTATION, hours=2),
)

TESTING_STEPS = (
    TemplateStep("Test Planning", C.ANALYSIS, hours=2),
    TemplateStep("Test Case Design", C.DESIGN, hours=4),
    TemplateStep("Test Implementation", C.DEVELOPMENT, fraction=0.6),
    TemplateStep("Test Execution", C.TESTING, fraction=0.3),
    TemplateStep("Bug Tracking and Reporting", C.DOCUMENTATION, hours=2),
)

DESIGN_STEPS = (
    TemplateStep("Requirements Analysis", C.ANALYSIS, hours=3),
    TemplateStep("User Research", C.ANALYSIS, hours=4),
    TemplateStep("Information Architecture", C.DESIGN, hours=3),
    TemplateStep("Wireframing", C.DESIGN, fraction=0.3),
    TemplateStep("Visual Design", C.DESIGN, fraction=0.4),
    TemplateStep("Design Review", C.ANALYSIS, hours=2),
    TemplateStep("Handoff to Development", C.DOCUMENTATION, hours=1),
)

DEPLOYMENT_STEPS = (
    TemplateStep("Environment Preparation", C.CONFIGURATION, hours=3),
    TemplateStep("Build and Package", C.DEVELOPMENT, hours=2),
    TemplateStep("Deployment Script Preparation", C.DEVELOPMENT, hours=3),
    TemplateStep("Staging Deployment", C.DEPLOYMENT, hours=2),
    TemplateStep("Smoke Testing", C.TESTING, hours=1),
    TemplateStep("Production Deployment", C.DEPLOYMENT, hours=2),
    TemplateStep("Post-Deployment Verification", C.TESTING, hours=2),
    TemplateStep("Rollback Plan Preparation", C.CONFIGURATION, hours=1),
)

DOCUMENTATION_STEPS = (
    TemplateStep("Documentation Planning", C.ANALYSIS, hours=1),
    TemplateStep("Content Research", C.RESEARCH, hours=3),
    TemplateStep("Draft Creation", C.DOCUMENTATION, fraction=0.5),
    TemplateStep("Review and Editing", C.DOCUMENTATION, fraction=0.3),
    TemplateStep("Visual Assets Creation", C.DESIGN, hours=2),
    TemplateStep("Format and Publish", C.DOCUMENTATION, hours=2),
)

ANALYSIS_STEPS = (
    TemplateStep("Data Collection", C.RESEARCH, hours=3),
    TemplateStep("Data Processing", C.DEVELOPMENT, hours=4),
    TemplateStep("Analysis Execution", C.ANALYSIS, fraction=0.6),
    TemplateStep("Results Interpretation", C.ANALYSIS, hours=2),
    TemplateStep("Report Generation", C.DOCUMENTATION, hours=3),
)

INTEGRATION_STEPS = (
    TemplateStep("Integration Planning", C.ANALYSIS, hours=2),
    TemplateStep("API Documentation Review", C.ANALYSIS, hours=2),
    TemplateStep("Integration Development", C.DEVELOPMENT, fraction=0.6),
    TemplateStep("Integration Testing", C.TESTING, fraction=0.3),
    TemplateStep("Performance Testing", C.PERFORMANCE, hours=2),
)

SECURITY_STEPS = (
    TemplateStep("Security Assessment", C.ANALYSIS, hours=3),
    TemplateStep("Threat Modeling", C.ANALYSIS, hours=4),
    TemplateStep("Security Implementation", C.SECURITY, fraction=0.5),
    TemplateStep("Security Testing", C.TESTING, fraction=0.3),
    TemplateStep("Security Documentation", C.DOCUMENTATION, hours=2),
)

PERFORMANCE_STEPS = (
    TemplateStep("Performance Baseline", C.ANALYSIS, hours=2),
    TemplateStep("Performance Profiling", C.ANALYSIS, hours=3),
    TemplateStep("Optimization Implementation", C.PERFORMANCE, fraction=0.5),
    TemplateStep("Performance Testing", C.TESTING, fraction=0.3),
    TemplateStep("Performance Monitoring Setup", C.CONFIGURATION, hours=2),
)

# Fallback for categories without a dedicated template. Caps keep huge parents
# from producing runaway planning/testing/documentation steps.
GENERIC_STEPS = (
    TemplateStep("Planning and Analysis", C.ANALYSIS, fraction=0.3, cap=8),
    TemplateStep("Implementation", C.DEVELOPMENT, fraction=0.5),
    TemplateStep("Testing and Validation", C.TESTING, fraction=0.2, cap=6),
    TemplateStep("Documentation", C.DOCUMENTATION, fraction=0.1, cap=4),
)

CATEGORY_TEMPLATES: Dict[TaskCategory, Tuple[TemplateStep, ...]] = {
    C.DEVELOPMENT: DEVELOPMENT_STEPS,
    C.TESTING: TESTING_STEPS,
    C.DESIGN: DESIGN_STEPS,
    C.DEPLOYMENT: DEPLOYMENT_STEPS,
    C.DOCUMENTATION: DOCUMENTATION_STEPS,
    C.ANALYSIS: ANALYSIS_STEPS,
    C.INTEGRATION: INTEGRATION_STEPS,
    C.SECURITY: SECURITY_STEPS,
    C.PERFORMANCE: PERFORMANCE_STEPS,
}
