from typing import Any, Dict, List, TypedDict, Union

# Mappings: map name -> top level key -> second level key -> value
Mappings = Dict[str, Dict[str, Dict[str, Any]]]


class Resource(TypedDict, total=False):
    Type: str
    Properties: Dict[str, Any]
    Condition: str
    DependsOn: Union[str, List[str]]
    Metadata: Dict[str, Any]


class ParameterDeclaration(TypedDict, total=False):
    Type: str
    Default: Any
    AllowedValues: List[Any]
    Description: str
    NoEcho: bool


class Output(TypedDict, total=False):
    Value: Any
    Description: str
    Export: Dict[str, Any]
    Condition: str


class Template(TypedDict, total=False):
    AWSTemplateFormatVersion: str
    Description: str
    Transform: Union[str, List[str]]
    Parameters: Dict[str, ParameterDeclaration]
    Mappings: Mappings
    Conditions: Dict[str, Any]
    Resources: Dict[str, Resource]
    Outputs: Dict[str, Output]
