"""Foundation layer: errors, the Result monad, and configuration."""
