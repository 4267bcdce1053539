import io
import re

from setuptools import find_packages, setup

__version__ = re.search(
    r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
    io.open("src/jobinvoke/version.py", encoding="utf_8_sig").read(),
).group(1)


setup(
    name="jobinvoke",
    version=__version__,
    description="jobinvoke is a Python library for invoking scheduled actions locally under a security identity.",
    long_description="""jobinvoke is a Python library for invoking scheduled actions locally under a security identity, with work item lifecycle events and captured failures.""",
    author="",
    author_email="",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    zip_safe=False,
    include_package_data=True,
    install_requires=[
        "pydantic>=2",
        "typing_extensions",
        "fire",
    ],
    extras_require={
        "tests": ["pytest"],
    },
)
