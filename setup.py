# setup.py
from setuptools import setup, find_packages

setup(
    name="a11y-page-checker",
    version="0.1.0",
    description="Проверка доступности страниц сайта (axe-core + Playwright) по sitemap или обходом ссылок",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"a11y_page_checker": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "click>=8.1",
        "Jinja2>=3.1",
        "playwright>=1.40",
        "axe-playwright-python>=0.1.4",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "a11y-page-checker=a11y_page_checker.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
