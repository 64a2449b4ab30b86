"""
Setup script para instalação do motor de Acordos e Parcelas.

Este arquivo permite instalar o projeto em modo editable para desenvolvimento:
    pip install -e .[test]

Isso adiciona o projeto ao PYTHONPATH e permite imports como:
    from sistemas.acordos.services import AcordoService
"""

from setuptools import setup, find_packages

setup(
    name="acordos-engine",
    version="1.0.0",
    description="Motor de acordos e parcelas da Câmara de Conciliação Fiscal",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        "SQLAlchemy>=2.0",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "pytz",
        "structlog>=23.0",
        "python-dateutil>=2.8",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
)
