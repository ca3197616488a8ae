"""Loss functions for binary classification, documented with texdocument.

Build with ``texdoc mode=build script=examples/losses.py`` or run directly.
"""

from texdocument import Axis, Plot, add_plot, new_document, tex, tex_block, tex_text

doc = new_document(
    "losses",
    title="Loss Functions for Binary Classification",
    author="A. Author",
    date=r"\today",
)
doc.add_package("url")

tex_text(r"""
Each loss below takes a label $y \in \{-1, +1\}$ and a real-valued score $s$.
""", section="Introduction")


@tex(r"The \emph{zero-one loss} counts misclassifications: $\ell(y, s) = \mathbb{1}[ys \le 0]$.")
def zero_one_loss(y, s):
    # ties count as errors
    return 1.0 if y * s <= 0 else 0.0


@tex(r"The \emph{hinge loss} is a convex upper bound: $\ell(y, s) = \max(0, 1 - ys)$.")
def hinge_loss(y, s):
    return max(0.0, 1.0 - y * s)


with tex_block(r"Both losses agree once the margin exceeds one:"):
    margins = [-1.0, 0.0, 0.5, 1.0, 2.0]

axis = Axis(options="xlabel={$ys$}, ylabel={loss}")
add_plot(axis, Plot(coordinates=[(m, zero_one_loss(1, m)) for m in margins], legend="zero-one"))
add_plot(axis, Plot(coordinates=[(m, hinge_loss(1, m)) for m in margins], legend="hinge"))
add_plot(doc, axis, caption="Zero-one and hinge loss as functions of the margin.")

if __name__ == "__main__":
    doc.generate("build")
