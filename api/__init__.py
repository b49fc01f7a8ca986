"""HTTP surface of the SEO audit service."""
