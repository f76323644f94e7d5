"""Gradient descent, differential evolution, particle swarm, line search and a numerical Hessian."""