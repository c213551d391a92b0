"""Constants for platform-checker."""

# Exit codes
EXIT_SUCCESS = 0  # All checks passed
EXIT_ISSUES = 1  # Policy violations or failing tests
EXIT_ERROR = 2  # Check could not run due to an error

# Check names, also used in summaries and JSON output
VERSION_MAPPING_CHECK = "dependency-version-mapping"
INCOMPLETE_EXCLUDES_CHECK = "incomplete-excludes"
ALTERNATIVE_DEPENDENCIES_CHECK = "alternative-dependencies"
JDK_TESTS_CHECK = "jdk-tests"

ALL_CHECKS = [
    VERSION_MAPPING_CHECK,
    INCOMPLETE_EXCLUDES_CHECK,
    ALTERNATIVE_DEPENDENCIES_CHECK,
    JDK_TESTS_CHECK,
]

# Report locations, relative to the build directory
REPORT_DIR_NAME = "platform-check"
ALTERNATIVES_REPORT_NAME = "alternative-dependencies.log"
INCOMPLETE_EXCLUDES_REPORT_NAME = "incomplete-excludes.log"

# Configurations containing this substring (case-insensitive) are not scanned
TEST_CONFIGURATION_MARKER = "test"

# Bundled resource with known superseded artifacts
DEFAULT_ALTERNATIVES_RESOURCE = "alternatives.properties"

# Appended to failures raised before resolution
VERSION_MAPPING_HELP = (
    "Add the dependencies to the managed platform, or relax the check with "
    "fail_on_unmapped_direct_dependency / fail_on_unmapped_transitive_dependency "
    "in .platform-checker.yaml."
)

# Environment variable exported to the test command with its results directory
TEST_RESULTS_ENV_VAR = "PLATFORM_CHECKER_TEST_RESULTS"
