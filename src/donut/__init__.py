"""
donut-spine: Donut report publishing for CI builds.

Locates JSON test results left by a build, copies them next to the build,
resolves user-defined report attributes against the build environment and
hands everything to a report generator whose verdict becomes the build
result.

Usage:
    from donut.attributes import resolve_attributes
    from donut.core.environment import build_environment

    env = build_environment(os.environ, "pom.xml")
    attrs = resolve_attributes("owner=${TEAM}\\ntitle=Nightly Run", env)
"""

__version__ = "0.3.0"
