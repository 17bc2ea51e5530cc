[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pagespider"
version = "0.1.0"
description = "Web page spider toolkit: charset and language detection, link classification, news extraction and domain probing"
requires-python = ">=3.10"
keywords = ["spider", "crawler", "news", "extraction", "charset", "language", "links"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
    "Topic :: Text Processing :: Markup :: HTML",
]
dependencies = [
    "beautifulsoup4",
    "chardet",
    "requests",
    "python-dateutil",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["pagespider"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
