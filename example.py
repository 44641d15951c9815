"""Example usage of the partial_types library."""

from partial_types import GeneratorOptions, GoParser, generate_unit

# A Go source file with one struct worth generating for
source = """
package models

import (
    "time"

    "github.com/google/uuid"
)

type User struct {
    ID      uuid.UUID         `particle:"id"`
    Name    string            `particle:"name"`
    Tags    []string          `particle:"tags,omitempty"`
    Created *time.Time
    Extra   map[string]string
}

func (u User) String() string { return u.Name }
"""

unit = GoParser().parse(source, path="models/user.go")

options = GeneratorOptions(package_name="partial", type_prefix="Partial", prune_imports=True)
generated = generate_unit(unit, options)

print(generated.render())

print("Accessors:")
for accessor in generated.accessors:
    print(f"  {accessor.signature()}")
