"""
Be sure you have recurrent installed in you Virtual Env.
>>> pip install -Ue .
"""
import recurrent
from recurrent import utils


def default_log_fn(epoch, total_loss, correct, losses):
    print("Epoch ", epoch, " loss ", total_loss, "correct", correct)


class FNNTrain:
    """Trains a `DNN` on a toy dataset with stochastic gradient descent.

    Args:
        hidden_layers (int): The number of neurons in each of the two hidden layers.
    """

    def __init__(self, hidden_layers):
        self.hidden_layers = hidden_layers
        self.model = self.make_model()

    def make_model(self):
        return recurrent.DNN(
            {
                "architecture": {
                    "input_size": 2,
                    "hidden_units": [self.hidden_layers, self.hidden_layers],
                    "output_size": 2,
                },
            }
        )

    def run_one(self, x):
        return self.model.forward(x)

    def train(self, data, learning_rate, max_epochs=500, log_fn=default_log_fn):
        self.learning_rate = learning_rate
        self.max_epochs = max_epochs
        self.model = self.make_model()
        self.model.set_trainability(True)

        losses = []
        for epoch in range(1, self.max_epochs + 1):
            total_loss = 0.0
            correct = 0

            for _ in range(data.length()):
                i = data.random_index()
                self.model.forward(data.get_input_for_sample(i))
                total_loss += self.model.backward(
                    data.get_expected_output_for_sample(i), learning_rate
                )
            losses.append(total_loss)

            # Logging
            if epoch % 10 == 0 or epoch == max_epochs:
                for i in range(data.length()):
                    out = self.run_one(data.get_input_for_sample(i))
                    expected = data.get_expected_output_for_sample(i)
                    correct += int(utils.argmax(out) == utils.argmax(expected))
                log_fn(epoch, total_loss, correct, losses)


if __name__ == "__main__":
    PTS = 50
    HIDDEN = 8
    RATE = 0.05
    data = recurrent.datasets["Simple"](PTS)
    FNNTrain(HIDDEN).train(data, RATE)
